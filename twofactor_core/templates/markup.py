"""
Email Markup
============
Literal HTML and plain-text bodies. Placeholders use ``string.Template``
syntax; HTML values are escaped by the renderer before substitution.
"""

from string import Template

BASE_STYLE = """
    body {
      font-family: Arial, sans-serif;
      line-height: 1.6;
      color: #333;
      max-width: 600px;
      margin: 0 auto;
      padding: 20px;
    }
    .header {
      color: white;
      padding: 30px;
      text-align: center;
      border-radius: 10px 10px 0 0;
    }
    .content {
      background: #f9fafb;
      padding: 30px;
      border: 1px solid #e5e7eb;
      border-top: none;
    }
    .footer {
      text-align: center;
      color: #6b7280;
      font-size: 12px;
      margin-top: 20px;
      padding-top: 20px;
      border-top: 1px solid #e5e7eb;
    }
"""

OTP_CHALLENGE_HTML = Template("""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <style>$base_style
    .header { background: linear-gradient(135deg, #2563eb 0%, #06b6d4 100%); }
    .otp-box {
      background: white;
      border: 2px dashed #2563eb;
      border-radius: 8px;
      padding: 20px;
      text-align: center;
      margin: 20px 0;
    }
    .otp-code {
      font-size: 32px;
      font-weight: bold;
      letter-spacing: 8px;
      color: #2563eb;
      font-family: 'Courier New', monospace;
    }
    .warning {
      background: #fef3c7;
      border-left: 4px solid #f59e0b;
      padding: 12px;
      margin: 20px 0;
      border-radius: 4px;
    }
  </style>
</head>
<body>
  <div class="header">
    <h1 style="margin: 0;">$product</h1>
    <p style="margin: 10px 0 0 0; opacity: 0.9;">Two-Factor Authentication</p>
  </div>
  <div class="content">
    <p>$greeting</p>
    <p>You requested a verification code for your $product account. Use the code below to complete your login:</p>

    <div class="otp-box">
      <p style="margin: 0 0 10px 0; color: #6b7280; font-size: 14px;">Your verification code is:</p>
      <div class="otp-code">$code</div>
      <p style="margin: 10px 0 0 0; color: #6b7280; font-size: 12px;">Valid for $validity</p>
    </div>

    <div class="warning">
      <strong>Security Notice:</strong> Never share this code with anyone. $product staff will never ask for your verification code.
    </div>

    <p>If you didn't request this code, please ignore this email or contact support if you have concerns about your account security.</p>

    <p style="margin-top: 30px;">
      Best regards,<br>
      <strong>$signature</strong>
    </p>
  </div>
  <div class="footer">
    <p>&copy; $year $product. All rights reserved.</p>
    <p>This is an automated message, please do not reply to this email.</p>
  </div>
</body>
</html>
""")

OTP_CHALLENGE_TEXT = Template("""$greeting

Your $product verification code is: $code

This code is valid for $validity.

If you didn't request this code, please ignore this email.

Best regards,
$signature
""")

TWO_FACTOR_ENABLED_HTML = Template("""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <style>$base_style
    .header { background: linear-gradient(135deg, #10b981 0%, #059669 100%); }
    .success-box {
      background: #d1fae5;
      border-left: 4px solid #10b981;
      padding: 15px;
      margin: 20px 0;
      border-radius: 4px;
    }
  </style>
</head>
<body>
  <div class="header">
    <h1 style="margin: 0;">Security Update</h1>
  </div>
  <div class="content">
    <p>$greeting</p>

    <div class="success-box">
      <strong>Two-Factor Authentication has been enabled</strong><br>
      Method: <strong>$method</strong>
    </div>

    <p>Your $product account is now more secure with two-factor authentication. You'll need to verify your identity using $method_lower each time you log in from a new device.</p>

    <p><strong>What this means:</strong></p>
    <ul>
      <li>Enhanced security for your account</li>
      <li>Protection against unauthorized access</li>
      <li>Verification required on untrusted devices</li>
    </ul>

    <p>If you didn't enable this feature, please contact support immediately.</p>

    <p style="margin-top: 30px;">
      Best regards,<br>
      <strong>$signature</strong>
    </p>
  </div>
  <div class="footer">
    <p>&copy; $year $product. All rights reserved.</p>
  </div>
</body>
</html>
""")

TWO_FACTOR_ENABLED_TEXT = Template("""$greeting

Two-Factor Authentication has been enabled on your $product account.
Method: $method

Your account is now more secure. You'll need to verify your identity using $method_lower each time you log in from a new device.

If you didn't enable this feature, please contact support immediately.

Best regards,
$signature
""")
