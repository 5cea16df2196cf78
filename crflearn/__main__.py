from crflearn.cli import app

app(prog_name="crflearn")
