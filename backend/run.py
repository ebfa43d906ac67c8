from battleship import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Serves the front-end bundle and the game socket on one port
    socketio.run(
        app,
        host=app.config['HOST'],
        port=app.config['PORT'],
        debug=app.config['DEBUG'],
        allow_unsafe_werkzeug=app.config['ALLOW_UNSAFE_WERKZEUG'],
    )
