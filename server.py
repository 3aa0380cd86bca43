from pathlib import Path
from xml.etree.ElementTree import ParseError
from flask import Flask
from flask_restful import abort, Api, Resource
from config import (
    FLASK_HOST, FLASK_PORT, DEBUG, CORS_ALLOW, CHANGELOG_PATH
)

from jazz_scm_client.processing.changelog import read_changelog

import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)
api = Api(app)
app_name = 'jazz-scm-client'

# Add headers to all responses
@app.after_request
def add_headers(response):
    # Add common security headers
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['X-XSS-Protection'] = '1; mode=block'
    # Add CORS headers
    response.headers['Access-Control-Allow-Origin'] = CORS_ALLOW
    response.headers['X-Application-Name'] = app_name
    return response


def load_changesets():
    changelog_path = Path(CHANGELOG_PATH)
    if not changelog_path.is_file():
        abort(404, message=f"No changelog at {changelog_path}")
    try:
        return read_changelog(changelog_path)
    except ParseError as e:
        logger.error(f"Unreadable changelog {changelog_path}: {e}")
        abort(500, message=f"Changelog could not be parsed: {e}")


def find_changeset(rev: str):
    for changeset in load_changesets():
        if changeset.rev == rev:
            return changeset
    abort(404, message=f"Unknown revision {rev}")


class ChangelogResource(Resource):
    def get(self):
        return [changeset.model_dump(mode="json") for changeset in load_changesets()]


class ChangeSetResource(Resource):
    def get(self, rev: str):
        return find_changeset(rev).model_dump(mode="json")


class ChangeSetFilesResource(Resource):
    def get(self, rev: str):
        return [item.model_dump() for item in find_changeset(rev).items]


api.add_resource(ChangelogResource, '/api/changelog')
api.add_resource(ChangeSetResource, '/api/changelog/<string:rev>')
api.add_resource(ChangeSetFilesResource, '/api/changelog/<string:rev>/files')

if __name__ == '__main__':
    app.run(host=FLASK_HOST, port=FLASK_PORT, debug=DEBUG)
