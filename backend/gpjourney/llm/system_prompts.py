"""Prompt text for the assistant features.

Centralized so tests and production share the exact same prompts.
"""

DIET_INFO = """
Gastroparesis is a disorder in which the stomach takes too long to move food into the small intestines. This can cause nausea, vomiting, weight loss, poor appetite, reflux, bloating, abdominal discomfort, and early satiety.
The purpose of a diet for gastroparesis is to reduce the symptoms and maintain adequate nutrition.
GENERAL GUIDELINES:
- Drink enough fluids to prevent dehydration.
- Eat small, frequent meals (5-6 or more per day).
- Eat nutritious foods first.
- Reduce fat intake. Liquid fat is often better tolerated.
- Reduce fiber intake. High-fiber foods should be avoided.
- Chew foods well to a mashed potato or pudding consistency.
- Sit up while eating and for at least 1 hour after.
- If diabetic, keep blood sugar under control.
- Avoid alcohol.
- Light exercise like walking after meals is recommended.

FOODS TO CONSUME:
- Milk/Products: Fat-free or low-fat versions of milk, yogurt, pudding, cottage cheese, cheeses, sour cream.
- Soups: Made from fat-free/low-fat milk or broth.
- Fruits: Fruit juices, canned fruits without skins (applesauce, peaches, pears), ripe banana. Peeled cooked fruit.
- Meat/Substitutes: Eggs, egg whites, reduced-fat creamy peanut butter, poultry with skin removed, lean fish, lean beef, lean pork.
- Fats & Oils: Fat-free or low-fat salad dressings, mayonnaise; light margarine.
- Breads/Grains: White breads, low-fiber cereal (<= 2 gm fiber/serving), Cream of Wheat, grits, pasta, white rice, noodles, low-fat low-fiber crackers.
- Vegetables: Tomato juice, smooth tomato sauce, well-cooked vegetables without skins (acorn squash, beets, carrots, mushrooms, potatoes, spinach, summer squash).
- Condiments: Fat-free gravy, mustard, ketchup, barbeque sauce.
- Sweets: Fat-free/low-fat desserts like angel food cake, frozen yogurt, sorbet, gelatin.
- Beverages: Gatorade, diet soft drinks, coffee, tea, water, non-carbonated sugar-free drinks.

FOODS TO AVOID:
- Milk/Products: 2% or whole milk, heavy cream, regular/full-fat dairy products.
- Soups: Cream-based soups, soups with whole vegetables/skins.
- Fruits: All raw and dried fruits, canned fruits with skins, berries, figs, kiwi, coconut.
- Meat/Substitutes: Bacon, sausage, hot dogs, fatty meats, fish packed in oil, regular peanut butter, fibrous meats (steaks, roasts), dried beans.
- Fats & Oils: Butter, margarine, cooking oils in moderation. Regular salad dressings, mayonnaise, lard.
- Breads/Grains: Oatmeal, whole grain items, granola, dense starches like bagels, fried dough.
- Vegetables: All RAW vegetables, cooked vegetables with skins; broccoli, Brussels sprouts, cabbage, celery, corn, eggplant, onions, peas, peppers.
- Condiments: Gravies, meat sauces, regular mayonnaise, cream/butter sauces.
- Sweets: Cakes, pies, cookies, pastries, ice cream.
- Beverages: Alcoholic beverages, carbonated beverages if bloating.
- Miscellaneous: Nuts, seeds, popcorn, chunky nut butters, preserves.
"""

SUGGESTIONS_SYSTEM = (
    "You are a helpful nutrition and fitness assistant for a person with "
    "gastroparesis (GP). The user has bad knees and a recovering left wrist. "
    "Respond ONLY with a JSON object with two string keys: \"food\" and \"exercise\"."
)

CORRELATION_SYSTEM = (
    "You analyze personal health journal logs for possible correlations between "
    "food, medication, weight and symptoms. This is not a medical diagnosis; say so. "
    "Answer in Markdown."
)

VISIT_SUMMARY_SYSTEM = "Summarize the doctor visit notes in at most 20 words."

REMINDER_SYSTEM = (
    "You set follow-up reminders for a person managing their medications. "
    "Always answer by calling the set_reminder tool with the task and the delay in minutes."
)
