"""
Main routes for AssetVerse
"""

from flask import Blueprint, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    """Health check"""
    return jsonify({'message': 'AssetVerse API is running'})
