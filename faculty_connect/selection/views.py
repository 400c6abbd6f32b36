import csv
import json
import logging
from functools import wraps

from django.contrib.auth import login, logout
from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from .catalog import get_catalog
from .exceptions import StoreUnavailableError
from .forms import AdminLoginForm
from .slots import SlotStore
from .submissions import NOT_FOUND, SubmissionStore
from .workflow import DELETED, ERROR, PARTIAL, delete_submission, submit_faculty_selection

logger = logging.getLogger(__name__)

SUBMISSION_STATUS = {
    None: 200,
    'validation': 400,
    'duplicate': 409,
    'slot_exhausted': 409,
    'persistence': 500,
    'store_unavailable': 503,
}

DELETION_STATUS = {
    DELETED: 200,
    PARTIAL: 207,
    NOT_FOUND: 404,
    ERROR: 503,
}


def is_admin(user):
    return user.is_staff or user.is_superuser


def admin_required(view):
    """JSON counterpart of login_required + user_passes_test(is_admin)."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'message': 'Authentication required.'}, status=401)
        if not is_admin(request.user):
            return JsonResponse({'message': 'Admin access only.'}, status=403)
        return view(request, *args, **kwargs)
    return wrapper


def _json_body(request):
    try:
        return json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def _store_down(exc):
    return JsonResponse({'success': False, 'message': exc.message}, status=503)


# ─────────────────────────────────────────────────────────────
# STUDENT VIEWS
# ─────────────────────────────────────────────────────────────

@require_GET
@ensure_csrf_cookie
def catalog_view(request):
    """Faculties, subjects and current availability for the selection form."""
    catalog = get_catalog()
    try:
        slots = SlotStore(catalog).get_all_slots()
    except StoreUnavailableError as exc:
        return _store_down(exc)

    return JsonResponse({
        'faculties': [{'id': f.id, 'name': f.name, 'capacity': f.capacity} for f in catalog.faculties],
        'subjects': [
            {'id': s.id, 'name': s.name, 'facultyIds': list(s.faculty_ids)}
            for s in catalog.subjects
        ],
        'slots': slots,
    })


@require_GET
def slots_view(request):
    try:
        return JsonResponse({'slots': SlotStore().get_all_slots()})
    except StoreUnavailableError as exc:
        return _store_down(exc)


@require_POST
def submit_view(request):
    payload = _json_body(request)
    if payload is None:
        return JsonResponse({'success': False, 'message': 'Invalid data'}, status=400)

    result = submit_faculty_selection(payload)
    return JsonResponse(result.as_dict(), status=SUBMISSION_STATUS.get(result.error, 500))


# ─────────────────────────────────────────────────────────────
# ADMIN VIEWS
# ─────────────────────────────────────────────────────────────

@require_POST
def admin_login_view(request):
    payload = _json_body(request)
    if not isinstance(payload, dict):
        payload = {}
    form = AdminLoginForm(request, data={
        'username': str(payload.get('username', '')).strip(),
        'password': payload.get('password', ''),
    })
    if not form.is_valid():
        return JsonResponse({'message': 'Invalid username or password'}, status=401)

    login(request, form.get_user())
    return JsonResponse({'message': 'Login successful'})


@require_POST
def admin_logout_view(request):
    logout(request)
    return JsonResponse({'message': 'Logout successful'})


def _submission_rows(catalog, records):
    """Flatten submissions for the dashboard / CSV, one column per subject."""
    rows = []
    for record in records:
        row = {
            'Timestamp': record.submitted_at.isoformat(),
            'Roll Number': record.roll_number,
            'Name': record.name,
            'Email ID': record.email,
            'WhatsApp Number': record.whatsapp_number,
        }
        for subject in catalog.subjects:
            faculty_id = record.selections.get(subject.id)
            if not faculty_id:
                row[subject.name] = 'Not Selected'
            else:
                faculty = catalog.faculty(faculty_id)
                row[subject.name] = faculty.name if faculty else f'Faculty ID {faculty_id} Not Found'
        rows.append(row)
    return rows


def _submission_headers(catalog):
    return ['Timestamp', 'Roll Number', 'Name', 'Email ID', 'WhatsApp Number'] + [s.name for s in catalog.subjects]


@require_GET
@admin_required
def admin_submissions(request):
    """Admin: every submission, newest first."""
    catalog = get_catalog()
    try:
        records = SubmissionStore().get_all()
    except StoreUnavailableError as exc:
        return _store_down(exc)

    rows = _submission_rows(catalog, records)
    logger.info('Admin %s listed %d submissions', request.user.username, len(rows))
    return JsonResponse({'headers': _submission_headers(catalog), 'submissions': rows})


@require_GET
@admin_required
def admin_export_csv(request):
    catalog = get_catalog()
    try:
        records = SubmissionStore().get_all()
    except StoreUnavailableError as exc:
        return _store_down(exc)

    filename = f'submissions_{timezone.now():%Y-%m-%d}.csv'
    response = HttpResponse(content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'

    headers = _submission_headers(catalog)
    writer = csv.DictWriter(response, fieldnames=headers)
    writer.writeheader()
    writer.writerows(_submission_rows(catalog, records))
    return response


@require_POST
@admin_required
def admin_delete_submission(request):
    """Admin: delete one submission and give its seats back."""
    payload = _json_body(request)
    roll_number = payload.get('rollNumber') if isinstance(payload, dict) else None
    if not roll_number or not isinstance(roll_number, str):
        return JsonResponse({'message': 'Roll number is required and must be a string.'}, status=400)

    result = delete_submission(roll_number.strip())
    logger.info('Admin %s deleted %s: %s', request.user.username, roll_number, result.status)
    return JsonResponse(result.as_dict(), status=DELETION_STATUS.get(result.status, 500))


@require_POST
@admin_required
def admin_reset_slots(request):
    try:
        SlotStore().reset_all()
    except StoreUnavailableError as exc:
        return _store_down(exc)
    logger.warning('Admin %s reset all faculty slots', request.user.username)
    return JsonResponse({
        'success': True,
        'message': 'All faculty slots have been reset to their initial values (per subject).',
    })
