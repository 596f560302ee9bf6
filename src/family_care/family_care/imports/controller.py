from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import require_admin_access
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/families/upload-csv", methods=["POST"], endpoint="families_upload_csv")
    @require_admin_access
    def upload_csv():
        upload = request.files.get("file")
        if upload is None or not upload.filename:
            return jsonify({"message": "No file uploaded"}), 400

        is_csv = upload.filename.lower().endswith(".csv") or upload.mimetype == "text/csv"
        if not is_csv:
            return jsonify({"message": "Only CSV files are allowed"}), 400

        result = container.csv_import_service.import_csv(upload.read())
        return jsonify(result.as_dict())
