from ds_ui.cli.main import main

main()
