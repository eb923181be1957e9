def plugin(app):
    app.emit("test", "DDD")
