from oscoca.cli import run

run()
