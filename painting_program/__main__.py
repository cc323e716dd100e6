from painting_program.app import main

main()
