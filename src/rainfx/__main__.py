from rainfx.main import main

main()
