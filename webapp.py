#!/usr/bin/env python3
"""
Flask API for the directory account audit
Hands the report model to the report renderer as JSON or armored text
"""

import os
import logging
from pathlib import Path
from datetime import datetime
from flask import Flask, Response, jsonify

from core.exceptions import AccountAuditError, ConfigurationError
from main import run_directory_audit
from processors.report_builder import to_armored, to_json
from utils.config import Config

app = Flask(__name__)


def setup_logging():
    """Setup logging for the web application"""
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_filename = log_dir / f"webapp_{timestamp}.log"

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_filename),
            logging.StreamHandler()
        ]
    )


def _audit_or_error():
    """Run the audit; returns (model, None) or (None, error response)"""
    try:
        model = run_directory_audit(Config())
    except ConfigurationError as e:
        app.logger.warning(str(e))
        return None, (jsonify({'error': str(e)}), 503)
    except AccountAuditError as e:
        app.logger.error(f"Audit failed: {e}")
        return None, (jsonify({'error': str(e)}), 502)

    return model, None


@app.route('/api/report')
def report():
    """Report model as JSON"""
    model, error = _audit_or_error()
    if error:
        return error
    return Response(to_json(model), mimetype='application/json')


@app.route('/api/report/armored')
def report_armored():
    """Report model as base64 armored text for embedding in a document"""
    model, error = _audit_or_error()
    if error:
        return error
    return Response(to_armored(model), mimetype='text/plain')


@app.route('/health')
def health_check():
    """Health check endpoint"""
    config = Config()
    ad_config_valid = config.validate_ad_config()

    return jsonify({
        'status': 'healthy' if ad_config_valid else 'configuration_error',
        'ad_config_valid': ad_config_valid,
        'missing_vars': config.get_missing_ad_vars()
    })


if __name__ == '__main__':
    setup_logging()

    config = Config()
    if not config.validate_ad_config():
        missing_vars = config.get_missing_ad_vars()
        app.logger.warning(f"Missing AD configuration: {', '.join(missing_vars)}")
    else:
        app.logger.info("AD configuration validated successfully")

    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_DEBUG', 'False').lower() == 'true'

    app.logger.info(f"Starting account audit API on port {port} (debug={debug})")
    app.run(host='0.0.0.0', port=port, debug=debug)
