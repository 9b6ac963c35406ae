from oas_gateway.cli.main import main

main()
