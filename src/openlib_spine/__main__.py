from openlib_spine.cli.app import app

app()
