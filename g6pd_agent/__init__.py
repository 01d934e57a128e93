"""G6PD safety agent: classifies foods, medications and products for G6PD deficiency."""
