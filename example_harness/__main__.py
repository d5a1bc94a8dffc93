from example_harness.cli import main

main()
