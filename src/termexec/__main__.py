from termexec.server import main

main()
