import os
import time
import uuid
from flask import request, jsonify, current_app
from . import uploads_bp
from ...core.errors import BridgeError
from ...core.imaging import normalize_image
from ...core.logging_service import LoggingService


@uploads_bp.route('/upload', methods=['POST'])
def upload():
    """Normalize an uploaded image and save it as PNG in the temp folder"""
    file = request.files.get('file')
    if file is None or file.filename == '':
        return jsonify({'error': 'No file uploaded'}), 400

    try:
        image = normalize_image(file.read(), file.mimetype)
    except BridgeError as e:
        if e.status_code >= 500:
            LoggingService.error('uploads', f"Upload error: {e}")
            return jsonify({'error': 'Failed to process upload', 'details': str(e)}), 500
        return jsonify(e.to_dict()), e.status_code

    tmp_dir = current_app.config['UPLOAD_TMP_DIR']
    os.makedirs(tmp_dir, exist_ok=True)

    file_name = f"upload_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}.png"
    file_path = os.path.join(tmp_dir, file_name)

    with open(file_path, 'wb') as f:
        f.write(image.data)

    LoggingService.info('uploads', f"Saved {image!r} to {file_path}")

    return jsonify({
        'success': True,
        'file': {
            'name': file_name,
            'path': file_path,
            'size': image.size,
            'width': image.width,
            'height': image.height,
            'format': 'png',
        },
    })
