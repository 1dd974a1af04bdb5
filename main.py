from foldertree import create_app

if __name__ == '__main__':
    app = create_app()

    # Get configuration
    server_port = app.config.get('SERVER_PORT', 4000)
    server_host = app.config.get('SERVER_HOST', '0.0.0.0')

    app.logger.info('Listening on http://%s:%s', server_host, server_port)
    app.run(debug=app.config.get('DEBUG', False),
            host=server_host,
            port=server_port,
            threaded=True)
