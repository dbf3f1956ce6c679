from ghsql.cli import app

app()
