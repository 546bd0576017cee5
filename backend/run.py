from arena import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, host=app.config['SERVER_HOST'], port=app.config['SERVER_PORT'], debug=True)
