from .log_splitter import main

main()
