"""initial schema

Revision ID: 3f1c2a9d7b41
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    ]


def upgrade():
    # Accounts and teachers
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('role', sa.String(length=16), nullable=False, server_default='STUDENT'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('real_name', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('class_nickname', sa.String(length=100), nullable=True),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('is_apply_for_teacher', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('zoom_invite_url', sa.String(length=500), nullable=True),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('custom_image_url', sa.String(length=500), nullable=True),
        sa.Column('is_image_public_open', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_phone', 'users', ['phone'])

    op.create_table(
        'teachers',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('nation', sa.String(length=2), nullable=False, server_default='KR'),
        sa.Column('subject', sa.String(length=2), nullable=False, server_default='en'),
        sa.Column('nick_name', sa.String(length=100), nullable=True),
        sa.Column('zoom_invite_link_url', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_teachers'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_teachers_user_id_users', ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', name='uq_teachers_user_id'),
        sa.CheckConstraint("nation IN ('KR','PH')", name='ck_teachers_nation'),
        sa.CheckConstraint("subject IN ('en','ja','ko','zh')", name='ck_teachers_subject'),
    )

    # Courses and their sessions
    op.create_table(
        'courses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('contents', sa.String(length=16), nullable=False, server_default='basic100'),
        sa.Column('location', sa.String(length=16), nullable=False, server_default='online'),
        sa.Column('generator_id', sa.Uuid(), nullable=True),
        sa.Column('teacher_id', sa.Uuid(), nullable=True),
        sa.Column('schedule_monday', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('schedule_tuesday', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('schedule_wednesday', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('schedule_thursday', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('schedule_friday', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('schedule_saturday', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('schedule_sunday', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('start_time', sa.String(length=5), nullable=True),
        sa.Column('end_time', sa.String(length=5), nullable=True),
        sa.Column('duration', sa.String(length=16), nullable=False, server_default='25분'),
        sa.Column('class_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('price', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_courses'),
        sa.ForeignKeyConstraint(['generator_id'], ['users.id'], name='fk_courses_generator_id_users', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['teacher_id'], ['teachers.id'], name='fk_courses_teacher_id_teachers', ondelete='SET NULL'),
        sa.CheckConstraint("contents IN ('tour100','basic100','wh100')", name='ck_courses_contents'),
        sa.CheckConstraint("location IN ('online','offline','hybrid')", name='ck_courses_location'),
        sa.CheckConstraint('price >= 0', name='ck_courses_price_positive'),
    )
    op.create_index('ix_courses_generator_id', 'courses', ['generator_id'])
    op.create_index('ix_courses_teacher_id', 'courses', ['teacher_id'])

    op.create_table(
        'class_dates',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('day_of_week', sa.String(length=3), nullable=False),
        sa.Column('start_time', sa.String(length=5), nullable=True),
        sa.Column('end_time', sa.String(length=5), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id', name='pk_class_dates'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name='fk_class_dates_course_id_courses', ondelete='CASCADE'),
    )
    op.create_index('ix_class_dates_course_date', 'class_dates', ['course_id', 'date'])

    # Enrollment and payment
    op.create_table(
        'enrollments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=False),
        sa.Column('course_title', sa.String(length=255), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=True),
        sa.Column('student_name', sa.String(length=100), nullable=False),
        sa.Column('student_phone', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('center_name', sa.String(length=100), nullable=True),
        sa.Column('local_name', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_enrollments'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name='fk_enrollments_course_id_courses', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['student_id'], ['users.id'], name='fk_enrollments_student_id_users', ondelete='SET NULL'),
        sa.UniqueConstraint('course_id', 'student_id', name='uq_enrollment_course_student'),
        sa.CheckConstraint("status IN ('pending','active','completed','dropped')", name='ck_enrollments_status'),
    )
    op.create_index('ix_enrollments_course_id', 'enrollments', ['course_id'])
    op.create_index('ix_enrollments_student_id', 'enrollments', ['student_id'])
    op.create_index('ix_enrollments_name_phone', 'enrollments', ['student_name', 'student_phone'])

    op.create_table(
        'wait_for_purchases',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=False),
        sa.Column('course_title', sa.String(length=255), nullable=False),
        sa.Column('user_name', sa.String(length=100), nullable=True),
        sa.Column('user_phone', sa.String(length=20), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('class_count', sa.Integer(), nullable=False),
        sa.Column('total_fee', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_wait_for_purchases'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_wait_for_purchases_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name='fk_wait_for_purchases_course_id_courses', ondelete='CASCADE'),
        sa.CheckConstraint("status IN ('pending','paid','expired')", name='ck_wait_for_purchases_status'),
        sa.CheckConstraint('total_fee >= 0', name='ck_wait_for_purchases_total_fee_positive'),
    )
    op.create_index('ix_wait_for_purchases_user_id', 'wait_for_purchases', ['user_id'])
    op.create_index('ix_wait_for_purchases_course_id', 'wait_for_purchases', ['course_id'])
    op.create_index('ix_wait_for_purchases_status_expires', 'wait_for_purchases', ['status', 'expires_at'])

    op.create_table(
        'purchases',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('payment_id', sa.String(length=100), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=True),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('order_name', sa.String(length=255), nullable=False),
        sa.Column('paid_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id', name='pk_purchases'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_purchases_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name='fk_purchases_course_id_courses', ondelete='SET NULL'),
        sa.UniqueConstraint('payment_id', name='uq_purchases_payment_id'),
        sa.CheckConstraint('amount >= 0', name='ck_purchases_amount_positive'),
    )
    op.create_index('ix_purchases_user_id', 'purchases', ['user_id'])

    # Attendance
    op.create_table(
        'attendances',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('class_date_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('is_attended', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_attendances'),
        sa.ForeignKeyConstraint(['class_date_id'], ['class_dates.id'], name='fk_attendances_class_date_id_class_dates', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name='fk_attendances_course_id_courses', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_attendances_user_id_users', ondelete='CASCADE'),
        sa.UniqueConstraint('class_date_id', 'user_id', name='uq_attendance_class_date_user'),
    )
    op.create_index('ix_attendances_course_id', 'attendances', ['course_id'])
    op.create_index('ix_attendances_user_id', 'attendances', ['user_id'])

    op.create_table(
        'teacher_attendances',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('teacher_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=False),
        sa.Column('class_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id', name='pk_teacher_attendances'),
        sa.ForeignKeyConstraint(['teacher_id'], ['teachers.id'], name='fk_teacher_attendances_teacher_id_teachers', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name='fk_teacher_attendances_course_id_courses', ondelete='CASCADE'),
        sa.UniqueConstraint('teacher_id', 'course_id', 'class_date', name='uq_teacher_attendance_day'),
    )
    op.create_index('ix_teacher_attendances_teacher_id', 'teacher_attendances', ['teacher_id'])

    # Sentence corpus and learning progress
    op.create_table(
        'sentences',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('no', sa.Integer(), nullable=False),
        sa.Column('en', sa.Text(), nullable=False),
        sa.Column('ko', sa.Text(), nullable=False),
        sa.Column('contents', sa.String(length=16), nullable=False),
        sa.Column('audio_url', sa.String(length=500), nullable=True),
        sa.Column('utube_url', sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_sentences'),
        sa.UniqueConstraint('no', name='uq_sentences_no'),
    )
    op.create_index('ix_sentences_contents', 'sentences', ['contents'])

    op.create_table(
        'unit_subjects',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('unit_number', sa.Integer(), nullable=False),
        sa.Column('subject_ko', sa.String(length=255), nullable=False),
        sa.Column('subject_en', sa.String(length=255), nullable=False),
        sa.Column('unit_utube_url', sa.String(length=500), nullable=True),
        sa.Column('contents', sa.String(length=16), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_unit_subjects'),
    )
    op.create_index('ix_unit_subjects_unit_number', 'unit_subjects', ['unit_number'])

    for table, unique_name in (
        ('completed_sentences', 'uq_completed_sentence'),
        ('favorite_sentences', 'uq_favorite_sentence'),
    ):
        stamp = 'completed_at' if table == 'completed_sentences' else 'created_at'
        op.create_table(
            table,
            sa.Column('id', sa.Uuid(), nullable=False),
            sa.Column('user_id', sa.Uuid(), nullable=False),
            sa.Column('course_id', sa.Uuid(), nullable=False),
            sa.Column('sentence_no', sa.Integer(), nullable=False),
            sa.Column(stamp, sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.PrimaryKeyConstraint('id', name=f'pk_{table}'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], name=f'fk_{table}_user_id_users', ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name=f'fk_{table}_course_id_courses', ondelete='CASCADE'),
            sa.UniqueConstraint('user_id', 'course_id', 'sentence_no', name=unique_name),
        )

    op.create_table(
        'user_next_days',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=True),
        sa.Column('user_next_day', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('total_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id', name='pk_user_next_days'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_user_next_days_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name='fk_user_next_days_course_id_courses', ondelete='CASCADE'),
    )
    op.create_index('ix_user_next_days_user_course', 'user_next_days', ['user_id', 'course_id'])

    # Activity counters
    op.create_table(
        'native_audio_attempts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=False),
        sa.Column('sentence_no', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id', name='pk_native_audio_attempts'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_native_audio_attempts_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name='fk_native_audio_attempts_course_id_courses', ondelete='CASCADE'),
    )
    op.create_index('ix_native_audio_user_course', 'native_audio_attempts', ['user_id', 'course_id'])

    op.create_table(
        'recordings',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=False),
        sa.Column('sentence_no', sa.Integer(), nullable=False),
        sa.Column('file_url', sa.String(length=500), nullable=False),
        sa.Column('attempt_count', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_recordings'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_recordings_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name='fk_recordings_course_id_courses', ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'course_id', 'sentence_no', name='uq_recording_sentence'),
    )

    op.create_table(
        'quiz_attempts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=False),
        sa.Column('sentence_no', sa.Integer(), nullable=False),
        sa.Column('kind', sa.String(length=32), nullable=True),
        sa.Column('attempt_quiz', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('correct_count', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_quiz_attempts'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_quiz_attempts_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name='fk_quiz_attempts_course_id_courses', ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'course_id', 'sentence_no', 'kind', name='uq_quiz_attempt_sentence'),
    )

    op.create_table(
        'youtube_view_attempts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=False),
        sa.Column('sentence_no', sa.Integer(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('viewed_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id', name='pk_youtube_view_attempts'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_youtube_view_attempts_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name='fk_youtube_view_attempts_course_id_courses', ondelete='CASCADE'),
    )
    op.create_index('ix_youtube_views_user_course', 'youtube_view_attempts', ['user_id', 'course_id'])

    # Voice sharing
    op.create_table(
        'my_voice_open_list',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=False),
        sa.Column('sentence_no', sa.Integer(), nullable=False),
        sa.Column('sentence_en', sa.Text(), nullable=True),
        sa.Column('my_voice_url', sa.String(length=500), nullable=False),
        sa.Column('like_count', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_my_voice_open_list'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_my_voice_open_list_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name='fk_my_voice_open_list_course_id_courses', ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'course_id', 'sentence_no', name='uq_open_voice_sentence'),
    )

    op.create_table(
        'voice_likes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('voice_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id', name='pk_voice_likes'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_voice_likes_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['voice_id'], ['my_voice_open_list.id'], name='fk_voice_likes_voice_id_my_voice_open_list', ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'voice_id', name='uq_voice_like'),
    )

    op.create_table(
        'voice_listened',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('voice_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_voice_listened'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_voice_listened_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['voice_id'], ['my_voice_open_list.id'], name='fk_voice_listened_voice_id_my_voice_open_list', ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'voice_id', name='uq_voice_listened'),
    )

    # Points and site settings
    op.create_table(
        'user_course_points',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id', name='pk_user_course_points'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_user_course_points_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], name='fk_user_course_points_course_id_courses', ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'course_id', name='uq_user_course_points'),
    )
    op.create_index('ix_user_course_points_course_id', 'user_course_points', ['course_id'])

    op.create_table(
        'selected_courses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('selected_course_id', sa.Uuid(), nullable=True),
        sa.Column('selected_course_contents', sa.String(length=16), nullable=True),
        sa.Column('selected_course_title', sa.String(length=255), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id', name='pk_selected_courses'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_selected_courses_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['selected_course_id'], ['courses.id'], name='fk_selected_courses_selected_course_id_courses', ondelete='SET NULL'),
        sa.UniqueConstraint('user_id', name='uq_selected_courses_user_id'),
    )

    op.create_table(
        'configurations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('site_name', sa.String(length=255), nullable=False),
        sa.Column('admin_email', sa.String(length=255), nullable=False),
        sa.Column('admin_id', sa.String(length=100), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id', name='pk_configurations'),
    )


def downgrade():
    for table in (
        'configurations',
        'selected_courses',
        'user_course_points',
        'voice_listened',
        'voice_likes',
        'my_voice_open_list',
        'youtube_view_attempts',
        'quiz_attempts',
        'recordings',
        'native_audio_attempts',
        'user_next_days',
        'favorite_sentences',
        'completed_sentences',
        'unit_subjects',
        'sentences',
        'teacher_attendances',
        'attendances',
        'purchases',
        'wait_for_purchases',
        'enrollments',
        'class_dates',
        'courses',
        'teachers',
        'users',
    ):
        op.drop_table(table)
