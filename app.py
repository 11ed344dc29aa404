import os

from acadmix import create_app

app = create_app()

if __name__ == '__main__':
    debug = str(os.getenv('FLASK_DEBUG', '0')).strip().lower() in {'1', 'true', 'yes', 'on'}
    app.run(debug=debug, port=int(os.getenv('PORT', '5000')))
