VERIFICATION_SUBJECT = "Verify your email"
VERIFICATION_BODY = (
    "Your verification code is {code}.\n\n"
    "Enter it on the verification page to activate your account. "
    "The code expires in {minutes} minutes."
)

WELCOME_SUBJECT = "Welcome to Our Platform"
WELCOME_BODY = "Welcome to our platform, {name}! We're glad to have you on board."

RESET_SUBJECT = "Password Reset Request"
RESET_BODY = (
    "You requested a password reset. Use the following link to reset your password: "
    "{link}\n\nThe link expires in {minutes} minutes. "
    "If you did not request this, please ignore this email."
)

RESET_SUCCESS_SUBJECT = "Password Reset Confirmation"
RESET_SUCCESS_BODY = (
    "Your password has been successfully reset. "
    "If you did not perform this action, please contact our support team immediately."
)
