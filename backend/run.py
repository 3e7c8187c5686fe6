from wordplay import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server so session timers can push state over websockets
    socketio.run(app, debug=True)
