from slash_engine.cli import run

run()
