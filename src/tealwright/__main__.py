from tealwright.cli import main

main()
