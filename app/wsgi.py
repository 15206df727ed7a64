from app.mbs import create_app

app = create_app()
