from devflow.execution.cli import main

main()
