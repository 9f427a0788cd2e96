# app.py
from portal import create_app

app = create_app()


@app.route('/', methods=['GET'])
def index():
    return {"service": "scholarship-claim-portal", "api": "/api"}


if __name__ == '__main__':
    app.run(debug=app.config.get("DEBUG", False))
