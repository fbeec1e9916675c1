from nowplaying.cli import main

main()
