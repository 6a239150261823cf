from docsync.cli import main

# python -m docsync
if __name__ == "__main__":
    raise SystemExit(main())
