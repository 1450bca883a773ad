from parsebox.cli import app

app()
