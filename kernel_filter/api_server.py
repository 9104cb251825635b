#!/usr/bin/env python3
"""
Kernel Filter API Server
Exposes the 3x3 convolution pass as a single JSON command for a host UI.
The host decodes/encodes image files; only raw RGBA8 pixels cross this boundary.
"""

import os
import logging
import base64
import binascii
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify
from flask_cors import CORS

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from .exceptions import DegenerateImage, FilterError
from .pipeline.filter_pass import process_image
from .services.convolution_service import ConvolutionService
from .services.raster_service import RasterService

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "5000"))
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "100")) * 1024 * 1024

app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

# Initialize services
raster_service = RasterService()
convolution_service = ConvolutionService()

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('kernel', 'image', 'width', 'height')


def decode_image_field(value):
    """Return (pixel buffer, response encoding) for the request's 'image' field."""
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True), 'base64'
        except (binascii.Error, ValueError):
            raise FilterError('image is not valid base64') from None
    if isinstance(value, list):
        return value, 'list'
    raise FilterError('image must be a list of byte values or a base64 string')


@app.route('/api/process-image', methods=['POST'])
def process_image_command():
    """Apply a 3x3 kernel to a raw RGBA8 buffer."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({'success': False, 'message': 'Request body must be a JSON object'}), 400

    missing = [field for field in REQUIRED_FIELDS if field not in payload]
    if missing:
        return jsonify({'success': False, 'message': f"Missing fields: {', '.join(missing)}"}), 400

    try:
        image, encoding = decode_image_field(payload['image'])
        result = process_image(
            kernel=payload['kernel'],
            image=image,
            width=payload['width'],
            height=payload['height'],
            multiplier=payload.get('multiplier', 1),
            raster_service=raster_service,
            convolution_service=convolution_service,
        )
    except DegenerateImage as e:
        logger.warning(f"Degenerate image rejected: {e}")
        return jsonify({'success': False, 'message': str(e)}), 422
    except FilterError as e:
        logger.warning(f"Invalid filter request: {e}")
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception as e:
        logger.error(f"Filter error: {e}")
        return jsonify({'success': False, 'message': 'Error processing image'}), 500

    logger.info(f"Processed {result.width}x{result.height} image")
    return jsonify({'success': True, **result.to_dict(encoding)})


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'message': 'Kernel Filter API is running',
        'strategy': convolution_service.strategy,
    })


@app.errorhandler(413)
def too_large(e):
    """Handle request too large error."""
    limit = app.config['MAX_CONTENT_LENGTH']
    if limit >= 1024 * 1024:
        limit_text = f"{limit // (1024 * 1024)}MB"
    else:
        limit_text = f"{limit} bytes"
    return jsonify({'success': False,
                    'message': f'Request too large. Maximum size is {limit_text}.'}), 413


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return jsonify({'success': False, 'message': 'Internal server error'}), 500


def main():
    logger.info(f"Starting Kernel Filter API on {API_HOST}:{API_PORT} "
                f"(strategy={convolution_service.strategy})")
    app.run(host=API_HOST, port=API_PORT, debug=False)


if __name__ == '__main__':
    main()
