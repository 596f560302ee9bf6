from __future__ import annotations

from flask import Flask, jsonify, request, send_file, send_from_directory

from ..common.http import parse_body, require_auth
from ..container import Container
from .schemas import FamilyImageRequest
from .service import FALLBACK_MIMETYPE, normalize_object_path


def register(app: Flask, container: Container) -> None:
    uploads = container.upload_service

    @app.route("/api/upload", methods=["POST"], endpoint="upload_image")
    @require_auth
    def upload_image():
        url = uploads.save_image(request.files.get("image"))
        return jsonify({"url": url})

    @app.route("/uploads/<path:name>", methods=["GET"], endpoint="uploaded_file")
    def uploaded_file(name: str):
        response = send_from_directory(uploads.upload_dir.resolve(), name)
        response.headers["Cross-Origin-Resource-Policy"] = "cross-origin"
        response.headers["X-Content-Type-Options"] = "nosniff"
        return response

    @app.route("/api/objects/upload", methods=["POST"], endpoint="objects_upload")
    @require_auth
    def upload_object():
        return jsonify({"objectPath": uploads.store_object(request.files.get("file"))})

    @app.route("/objects/<path:object_path>", methods=["GET"], endpoint="objects_get")
    @require_auth
    def get_object(object_path: str):
        path, mimetype = uploads.resolve_object(object_path)
        response = send_file(
            path, mimetype=mimetype, max_age=3600, as_attachment=mimetype == FALLBACK_MIMETYPE
        )
        response.headers["X-Content-Type-Options"] = "nosniff"
        return response

    @app.route("/api/family-images", methods=["PUT"], endpoint="family_images")
    @require_auth
    def family_image():
        body = parse_body(FamilyImageRequest)
        return jsonify({"objectPath": normalize_object_path(body.image_url)})
