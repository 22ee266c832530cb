from theia_standalone.cli.cli import main

if __name__ == "__main__":
    main()
