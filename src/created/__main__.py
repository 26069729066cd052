from created.daemon import main

main()
