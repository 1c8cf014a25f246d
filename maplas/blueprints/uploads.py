from flask import Blueprint, current_app, jsonify, request, send_from_directory

from ..services.uploads import save_image

uploads_bp = Blueprint("uploads", __name__)


@uploads_bp.post("/api/upload")
def upload():
    url = save_image(request.files.get("image"), current_app.config["UPLOAD_FOLDER"])
    return jsonify({"url": url}), 201


@uploads_bp.get("/uploads/<path:filename>")
def uploaded_file(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
