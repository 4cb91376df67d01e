from sysmaint.cli import main

main()
