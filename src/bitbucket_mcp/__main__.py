from bitbucket_mcp.server import main

main()
