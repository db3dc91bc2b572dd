from captainslog.main import main

main()
