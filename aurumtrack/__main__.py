from aurumtrack.cli.main import app

app(prog_name="aurumtrack")
