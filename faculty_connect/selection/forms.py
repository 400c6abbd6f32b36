from django import forms
from django.conf import settings
from django.contrib.auth.forms import AuthenticationForm

DEFAULT_ROLL_NUMBER_PATTERN = r'^2[0-3]09[15]A05[0-9A-K][0-9]$'

# JSON payload key -> form field name
PAYLOAD_FIELDS = {
    'rollNumber': 'roll_number',
    'name': 'name',
    'email': 'email',
    'whatsappNumber': 'whatsapp_number',
}
SELECTION_PREFIX = 'selections.'


def _text(value):
    return value if isinstance(value, str) else ''


class SubmissionForm(forms.Form):
    """
    Student details plus one faculty choice per catalog subject.

    Selection fields are added per subject as "selections.<subject_id>",
    each limited to that subject's eligible faculty.
    """
    roll_number = forms.RegexField(
        regex=DEFAULT_ROLL_NUMBER_PATTERN,
        max_length=20,
        error_messages={'invalid': 'Invalid roll number format.', 'required': 'Roll number is required.'},
    )
    name = forms.CharField(
        min_length=2,
        max_length=100,
        error_messages={
            'min_length': 'Name must be at least 2 characters long.',
            'max_length': 'Name must be less than 100 characters.',
            'required': 'Name is required.',
        },
    )
    email = forms.EmailField(
        error_messages={'invalid': 'Invalid email address.', 'required': 'Email ID is required.'},
    )
    whatsapp_number = forms.RegexField(
        regex=r'^[6789]\d{9}$',
        error_messages={
            'invalid': 'Invalid WhatsApp number. Must be a 10-digit number starting with 6, 7, 8, or 9.',
            'required': 'WhatsApp number is required.',
        },
    )

    def __init__(self, catalog, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.catalog = catalog

        pattern = getattr(settings, 'FACULTY_CONNECT', {}).get('ROLL_NUMBER_PATTERN')
        if pattern and pattern != DEFAULT_ROLL_NUMBER_PATTERN:
            self.fields['roll_number'] = forms.RegexField(
                regex=pattern,
                max_length=20,
                error_messages=self.fields['roll_number'].error_messages,
            )

        for subject in catalog.subjects:
            choices = [(fid, catalog.faculty(fid).name) for fid in subject.faculty_ids]
            self.fields[SELECTION_PREFIX + subject.id] = forms.ChoiceField(
                label=subject.name,
                choices=choices,
                error_messages={
                    'required': f'Faculty selection is missing for {subject.name}.',
                    'invalid_choice': f'That faculty does not teach {subject.name}.',
                },
            )

    @classmethod
    def from_payload(cls, catalog, payload):
        """Build a bound form from the JSON body of a submission request."""
        # Form fields coerce with str(); anything that is not already a string
        # is treated as missing so the field's required message applies.
        data = {field: _text(payload.get(key)) for key, field in PAYLOAD_FIELDS.items()}
        selections = payload.get('selections') or {}
        malformed = not isinstance(selections, dict)
        if malformed:
            selections = {}
        for subject_id, faculty_id in selections.items():
            data[SELECTION_PREFIX + str(subject_id)] = _text(faculty_id)

        form = cls(catalog, data=data)
        form.selections_malformed = malformed
        form.extra_subjects = [str(sid) for sid in selections if catalog.subject(str(sid)) is None]
        return form

    def clean(self):
        cleaned = super().clean()
        if getattr(self, 'selections_malformed', False):
            raise forms.ValidationError('Selections must map each subject to one faculty.')
        extra = getattr(self, 'extra_subjects', [])
        if extra:
            raise forms.ValidationError(f'Unknown subject(s) in selections: {", ".join(extra)}.')
        return cleaned

    def selections(self):
        """{subject_id: faculty_id} in catalog order. Only valid after is_valid()."""
        return {
            subject.id: self.cleaned_data[SELECTION_PREFIX + subject.id]
            for subject in self.catalog.subjects
        }

    def field_errors(self):
        """Errors keyed the way the JSON payload names its fields."""
        reverse = {field: key for key, field in PAYLOAD_FIELDS.items()}
        errors = {}
        for name, messages in self.errors.items():
            key = '__all__' if name == '__all__' else reverse.get(name, name)
            errors[key] = list(messages)
        return errors


class AdminLoginForm(AuthenticationForm):
    """Staff-only login for the admin endpoints."""

    def confirm_login_allowed(self, user):
        super().confirm_login_allowed(user)
        if not (user.is_staff or user.is_superuser):
            raise forms.ValidationError('Invalid admin credentials.', code='not_staff')
