from django import forms

INVALID_PRODUCT = "Invalid product."
INVALID_NAME = "Please enter a valid name."
INVALID_EMAIL = "Please enter a valid email address."
INVALID_MESSAGE = "Please enter a message with at least 10 characters."
INVALID_REPLY = "Please enter a reply message with at least 10 characters."


def _messages(text, *codes):
    return {code: text for code in codes}


class InquiryForm(forms.Form):
    """Storefront submission. Every field maps to a single human-readable error."""

    product_ref = forms.CharField(
        max_length=64,
        error_messages=_messages(INVALID_PRODUCT, "required", "max_length"),
    )
    sender_name = forms.CharField(
        min_length=2,
        error_messages=_messages(INVALID_NAME, "required", "min_length"),
    )
    sender_email = forms.EmailField(
        max_length=254,
        error_messages=_messages(INVALID_EMAIL, "required", "invalid", "max_length"),
    )
    # passed through as typed
    sender_phone = forms.CharField(
        required=False,
        strip=False,
    )
    message = forms.CharField(
        min_length=10,
        widget=forms.Textarea,
        error_messages=_messages(INVALID_MESSAGE, "required", "min_length"),
    )

    def __init__(self, *args, lookup=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.lookup = lookup
        self.product = None

    def clean_product_ref(self):
        ref = self.cleaned_data["product_ref"]
        info = self.lookup(ref) if self.lookup else None
        if info is None:
            raise forms.ValidationError(INVALID_PRODUCT, code="invalid_product")
        self.product = info
        return ref

    def clean_sender_name(self):
        # single line; the name ends up in a Reply-To header
        return " ".join(self.cleaned_data["sender_name"].split())


class ReplyForm(forms.Form):
    body = forms.CharField(
        min_length=10,
        widget=forms.Textarea(attrs={"rows": 8, "placeholder": "Type your reply here..."}),
        error_messages=_messages(INVALID_REPLY, "required", "min_length"),
    )
