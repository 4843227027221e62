#!/usr/bin/env python3

from flask import Flask, request, jsonify, Response
import os

app = Flask(__name__)

HOME_PAGE = '''<!DOCTYPE html>
<html>
<head>
    <title>httpcurl echo server</title>
</head>
<body>
    <h1>httpcurl echo server</h1>
    <p>Send any GET, DELETE, POST or PUT to /echo to see what arrived.</p>
</body>
</html>
'''

@app.route('/')
def home():
    return HOME_PAGE

@app.route('/echo', methods=['GET', 'DELETE', 'POST', 'PUT'])
@app.route('/echo/<path:subpath>', methods=['GET', 'DELETE', 'POST', 'PUT'])
def echo(subpath=''):
    return jsonify({
        'method': request.method,
        'path': request.path,
        'query': request.query_string.decode('latin-1'),
        'headers': dict(request.headers),
        'body': request.get_data(as_text=True),
    })

@app.route('/text')
def text():
    return Response('hello', mimetype='text/plain')

@app.route('/status/<int:code>')
def status(code):
    return Response(f'status {code}', status=code, mimetype='text/plain')

if __name__ == '__main__':
    port = int(os.environ.get('ECHO_PORT', '8000'))
    print(f"Starting echo server on http://localhost:{port}")
    app.run(host='127.0.0.1', port=port, debug=True)
