from megagen.cli import main

main()
