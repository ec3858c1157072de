from .explorer import main

main()
