"""Systems: swing factors, shock overlay, policy responses, regional feedback, support softening."""
