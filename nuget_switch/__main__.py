from nuget_switch.cli import main

main()
