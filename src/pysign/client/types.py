"""Payload types for the YouSign v3 API.

Requests and responses travel as plain dicts; these TypedDicts document
their shape for type checkers and carry no runtime behaviour.
"""

from __future__ import annotations

from typing import Any, BinaryIO, Literal, NotRequired, TypedDict

SignatureRequestStatus = Literal[
    "draft",
    "ongoing",
    "done",
    "deleted",
    "expired",
    "canceled",
    "approval",
    "rejected",
    "declined",
]

SignatureLevel = Literal[
    "electronic_signature",
    "advanced_electronic_signature",
    "electronic_signature_with_qualified_certificate",
    "qualified_electronic_signature",
    "qualified_electronic_signature_mode_1",
]

# "none": the caller delivers signature links itself; "email": YouSign mails signers.
DeliveryMode = Literal["none", "email"]

DocumentNature = Literal["attachment", "signable_document"]

SignerStatus = Literal[
    "initiated",
    "declined",
    "notified",
    "verified",
    "processing",
    "consent_given",
    "signed",
    "aborted",
    "error",
]

AuditTrailLocale = Literal["de", "en", "es", "fr", "it"]
SignerLocale = Literal["en", "fr", "de", "it", "nl", "es", "pl"]
SignatureAuthMode = Literal["otp_email", "otp_sms", "no_otp"]


class ReminderSettings(TypedDict):
    interval_in_days: Literal[1, 2, 7, 14]
    max_occurrences: int


class EmailNotificationSender(TypedDict):
    type: Literal["custom", "organization", "workspace"]
    custom_name: NotRequired[str]


class EmailNotification(TypedDict):
    sender: EmailNotificationSender | None
    custom_note: NotRequired[str | None]


class CreateSignatureRequestOptions(TypedDict):
    name: str
    delivery_mode: DeliveryMode
    ordered_signers: NotRequired[bool]
    timezone: NotRequired[str]
    expiration_date: NotRequired[str]
    template_id: NotRequired[str]
    external_id: NotRequired[str]
    custom_experience_id: NotRequired[str]
    workspace_id: NotRequired[str]
    audit_trail_locale: NotRequired[AuditTrailLocale | None]
    signers_allowed_to_decline: NotRequired[bool]
    email_notification: NotRequired[EmailNotification | None]


class SignerInner(TypedDict):
    id: str
    status: SignerStatus


class DocumentInner(TypedDict):
    id: str
    nature: DocumentNature


class SignatureRequest(TypedDict):
    id: str
    status: SignatureRequestStatus
    name: str
    delivery_mode: DeliveryMode
    created_at: str
    ordered_signers: bool
    reminder_settings: ReminderSettings | None
    timezone: str
    expiration_date: str
    source: str
    signers: list[SignerInner]
    approvers: list[dict[str, Any]]
    documents: list[DocumentInner]
    external_id: str | None
    custom_experience_id: str | None
    signers_allowed_to_decline: bool
    audit_trail_locale: AuditTrailLocale
    bulk_send_batch_id: str | None


class URLFile(TypedDict):
    type: Literal["url"]
    url: str
    encoding: NotRequired[str]
    headers: NotRequired[dict[str, str]]
    mimeType: NotRequired[str]
    fileName: NotRequired[str]


# Raw bytes, an open binary file, (filename, content) or (filename, content, content_type),
# a URL string, or a URL descriptor.
FileInput = bytes | BinaryIO | tuple[str, Any] | tuple[str, Any, str] | str | URLFile


class AddFileOptions(TypedDict):
    file: FileInput
    nature: DocumentNature
    insert_after_id: NotRequired[str]
    password: NotRequired[str]
    initials: NotRequired[dict[str, Any]]
    parse_anchors: NotRequired[bool]


class AddedFile(TypedDict):
    id: str
    filename: str
    nature: DocumentNature
    content_type: str
    sha256: str
    is_protected: bool
    is_signed: bool
    created_at: str
    total_pages: int | None
    is_locked: bool
    total_anchors: int


class FieldInput(TypedDict):
    document_id: str
    type: Literal["signature", "mention", "text", "checkbox", "radio_group"]
    page: int
    x: NotRequired[float]
    y: NotRequired[float]
    height: NotRequired[float]
    width: NotRequired[float | None]
    mention: NotRequired[str]
    question: NotRequired[str]
    max_length: NotRequired[int]
    optional: NotRequired[bool]


class SignerInfo(TypedDict):
    first_name: str
    last_name: str
    email: str
    phone_number: str | None
    locale: SignerLocale


class AddSignerOptions(TypedDict):
    info: SignerInfo
    signature_level: SignatureLevel
    fields: NotRequired[list[FieldInput]]
    insert_after_id: NotRequired[str | None]
    signature_authentication_mode: NotRequired[SignatureAuthMode | None]
    redirect_urls: NotRequired[dict[str, str | None]]
    custom_text: NotRequired[dict[str, str | None]]
    delivery_mode: NotRequired[DeliveryMode | None]
    identification_attestation_id: NotRequired[str | None]


class AddSignerResponse(TypedDict):
    id: str
    info: SignerInfo
    status: SignerStatus
    fields: list[dict[str, Any]]
    signature_level: SignatureLevel
    signature_link: str | None
    signature_link_expiration_date: str | None
    delivery_mode: DeliveryMode | None


class SignatureRequestActivateResponse(TypedDict):
    id: str
    status: Literal["ongoing", "approval"]
    name: str
    delivery_mode: DeliveryMode
    signers: list[dict[str, Any]]
    approvers: list[dict[str, Any]]
    documents: list[DocumentInner]


class SignatureRequestQuery(TypedDict, total=False):
    limit: int
    status: SignatureRequestStatus
    after: str
    external_id: str
    source: list[str]
    q: str


class QueryMeta(TypedDict):
    next_cursor: str | None


class SignatureRequestQueryResult(TypedDict):
    meta: QueryMeta
    data: list[SignatureRequest]


class CertificateData(TypedDict):
    version: int
    signature_request: SignatureRequest
    sender: dict[str, Any]
    signer: dict[str, Any]
    documents: list[dict[str, Any]]
    organization: dict[str, str]
    authentication: dict[str, str]
    electronic_signature_level: dict[str, str]
