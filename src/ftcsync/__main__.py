from ftcsync.cli import main

main()
