from docsearch.mcp_server.server import main

main()
