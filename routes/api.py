"""API endpoints"""
from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from sqlalchemy import or_

from models import Student

api_bp = Blueprint('api', __name__)


@api_bp.route('/student_search')
@login_required
def student_search():
    query = request.args.get('q', '').strip()
    if len(query) < 2:
        return jsonify([])

    students = Student.query.filter(
        Student.user_id == current_user.id,
        or_(
            Student.admission_number.contains(query),
            Student.name.contains(query)
        )
    ).order_by(Student.name).limit(10).all()

    return jsonify([{
        'id': s.id,
        'admission_number': s.admission_number,
        'name': s.name,
        'class': s.class_name
    } for s in students])


@api_bp.route('/student_balance/<int:student_id>')
@login_required
def student_balance(student_id):
    student = Student.query.filter_by(id=student_id, user_id=current_user.id).first_or_404()
    balance = student.get_current_balance()

    return jsonify({
        'student_id': student_id,
        'admission_number': student.admission_number,
        'name': student.name,
        'class_fee': float(student.class_fee),
        'balance': float(balance)
    })
