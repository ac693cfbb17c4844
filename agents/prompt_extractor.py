EXTRACTOR_PROMPT_V1 = """
Analyze the provided water quality report image. Extract the following parameters for the first sample listed: pH, Salinity (ppt), CO2 (ppm), HCO3 (ppm), Total Mg (ppm), Total Ca (ppm), Total Hardness (ppm), Total Ammonia Nitrogen (ppm), Unionized Ammonia (ppm), D.O. (Dissolved Oxygen ppm), Iron (ppm), H2S (ppm), Nitrite (ppm), Temperature (°C), and Chlorine (ppm). If a parameter is not found or unclear, use null.
Based on these parameters, determine a general water quality status (Safe, Warning, or Critical) for common aquaculture species (e.g., shrimp, fish).
Provide 2-3 brief, actionable suggestions for the aquafarmer.
Return the response STRICTLY as a JSON object with the following structure:
{
  "parameters": {
    "pH": <number_or_null>,
    "salinity": <number_or_null>,
    "co2": <number_or_null>,
    "hco3": <number_or_null>,
    "totalMg": <number_or_null>,
    "totalCa": <number_or_null>,
    "totalHardness": <number_or_null>,
    "totalAmmoniaNitrogen": <number_or_null>,
    "unionizedAmmonia": <number_or_null>,
    "dissolvedOxygen": <number_or_null>,
    "iron": <number_or_null>,
    "h2s": <number_or_null>,
    "nitrite": <number_or_null>,
    "temperature": <number_or_null>,
    "chlorine": <number_or_null>
  },
  "status": "<Safe|Warning|Critical|Unknown>",
  "suggestions": ["<suggestion1>", "<suggestion2>"]
}
Ensure the output is only the JSON object, without any surrounding text or markdown fences.
Example for parameters: "pH": 8.0, "salinity": 1.0, etc.
Example for status: "status": "Warning"
Example for suggestions: "suggestions": ["Monitor pH levels closely.", "Consider partial water exchange."]
"""

# Returned in UI test mode so the edit/view screens can be exercised offline.
EXTRACTOR_TEST_REPLY = """
{
  "parameters": {
    "pH": 7.9, "salinity": 12, "co2": 4, "hco3": 160, "totalMg": 410,
    "totalCa": 150, "totalHardness": 1800, "totalAmmoniaNitrogen": 0.3,
    "unionizedAmmonia": 0.02, "dissolvedOxygen": 5.6, "iron": 0.1,
    "h2s": null, "nitrite": 0.05, "temperature": 29, "chlorine": null
  },
  "status": "Safe",
  "suggestions": [
    "Keep aerators running through the early morning hours.",
    "Re-test ammonia after the next feed adjustment."
  ]
}
"""
