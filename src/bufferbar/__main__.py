from bufferbar.cli import app

app()
