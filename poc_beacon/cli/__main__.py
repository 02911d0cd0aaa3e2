from poc_beacon.cli import main

main()
