from functools import wraps
from flask import jsonify
from flask_jwt_extended import get_jwt, verify_jwt_in_request

def roles_required(*allowed_roles):
    """Use after @jwt_required(): the role travels as an additional JWT claim."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            claims = get_jwt()

            if claims.get("role") not in allowed_roles:
                return jsonify({"error": "Insufficient permissions"}), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator

def current_role():
    """Role of the caller if a valid token was sent, else None. Never rejects."""
    verify_jwt_in_request(optional=True)
    return get_jwt().get("role")
