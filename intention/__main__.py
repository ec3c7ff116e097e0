# intention/__main__.py

from intention.cli import main

if __name__ == "__main__":
    main()
