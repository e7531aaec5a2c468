from codegraph_upgrade.cli.main import main

main()
