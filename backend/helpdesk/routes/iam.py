from flask import Blueprint, abort
from flask_jwt_extended import create_access_token, jwt_required
from helpdesk.constants.enums import UserRole
from helpdesk.decorators.auth import require_roles
from helpdesk.schemas import parse_payload, LoginInput, UserCreate, UserUpdate, UserQuery
from helpdesk.services import users as user_svc
from helpdesk.services.policy import build_claims, current_user_id, assert_self_or_staff
from helpdesk.utils.listing import query_args, build_list_payload
from helpdesk.utils.serialization import user_json
from helpdesk.utils.validation import json_body

iam_bp = Blueprint('iam', __name__)

ADMIN = UserRole.ADMIN.value


@iam_bp.post('/auth/login')
def login():
    data = parse_payload(LoginInput, json_body())
    user = user_svc.login_user(data.email, data.password)
    if not user:
        abort(401, description='invalid credentials')
    # JWT identity must be a string (flask-jwt-extended v4 requirement)
    token = create_access_token(identity=str(user.id), additional_claims=build_claims(user))
    return {'access_token': token, 'user': user_json(user)}


@iam_bp.get('/auth/me')
@jwt_required()
def me():
    user = user_svc.get_user_by_id(current_user_id())
    if not user:
        abort(404)
    return user_json(user)


@iam_bp.get('/users')
@require_roles(ADMIN)
def list_users():
    query = query_args(UserQuery)
    rows, total = user_svc.get_users(query)
    return build_list_payload([user_json(u) for u in rows], total, query.limit, query.offset)


@iam_bp.post('/users')
@require_roles(ADMIN)
def create_user():
    user = user_svc.create_user(parse_payload(UserCreate, json_body()))
    return user_json(user), 201


@iam_bp.get('/users/<int:user_id>')
@require_roles()
def get_user(user_id: int):
    assert_self_or_staff(user_id)
    user = user_svc.get_user_by_id(user_id)
    if not user:
        abort(404, description=f'User with id {user_id} not found')
    return user_json(user)


@iam_bp.patch('/users/<int:user_id>')
@require_roles(ADMIN)
def update_user(user_id: int):
    payload = parse_payload(UserUpdate, {**json_body(), 'id': user_id})
    return user_json(user_svc.update_user(payload))


__all__ = ['iam_bp']
