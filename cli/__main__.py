from cli.tramp_cli import main

main()
